"""
SUPABASE STORE MODULE
- This Module exports the remote collaborators of the workshop archive:
- The workshops table (select, insert, update, delete, upsert).
- The attachments storage bucket.
- The lazily built Supabase client.
"""

from .attachments import Attachment, AttachmentStorage
from .supabase_client import get_supabase_client
from .workshops_table import WorkshopsTable


__all__ = ["Attachment", "AttachmentStorage", "get_supabase_client", "WorkshopsTable"]
