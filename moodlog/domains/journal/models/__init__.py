from moodlog.domains.journal.models.bookmark import Bookmark
from moodlog.domains.journal.models.journal_entry import JournalAnalysis, JournalEntry
from moodlog.domains.journal.models.sentiment_record import SentimentRecord

__all__ = ["Bookmark", "JournalAnalysis", "JournalEntry", "SentimentRecord"]
