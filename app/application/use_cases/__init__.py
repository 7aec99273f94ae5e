"""Use cases: board mutations and attachment uploads."""

from app.application.use_cases.attachments import AttachmentService
from app.application.use_cases.mutations import MutationProcessor, parse_command

__all__ = ["AttachmentService", "MutationProcessor", "parse_command"]
