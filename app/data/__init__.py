"""CSV ingestion, normalisation, and the in-memory record store."""
from .loader import parse_csv, load_csv, discover_csvs, to_frame
from .store import DataStore
from .schemas import Transaction, FilterCriteria, DashboardStats
