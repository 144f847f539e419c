from models.waitlist_entry import EMAIL_UNIQUE_CONSTRAINT, STATUS_COMPLETE, STATUS_INCOMPLETE, WaitlistEntry

__all__ = ["EMAIL_UNIQUE_CONSTRAINT", "STATUS_COMPLETE", "STATUS_INCOMPLETE", "WaitlistEntry"]
