"""Vercel serverless entry point for the bug tracker."""
import sys
import os

# Add src to path so imports work
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from bugtracker.config import BugTrackerConfig
from bugtracker.sample_data import seed_sample_bugs
from bugtracker.service import BugService
from bugtracker.store.db import Database
from bugtracker.store.migrations import run_migrations
from bugtracker.store.repositories import BugRepository
from bugtracker.web.app import create_app

# In-memory DB for serverless demo
db = Database(":memory:")
db.connect()
run_migrations(db)

# Seed a few sample bugs so the demo isn't empty
seed_sample_bugs(BugService(BugRepository(db)))

app = create_app(db=db, config=BugTrackerConfig.from_env())
