"""
Rebuild the smart-search vector index without going through the queue.
Run with: python scripts/reindex_knowledge.py
"""

import os
import sys

# Add project root to path
sys.path.append(os.getcwd())

from app.core.logging import setup_logging
from app.workers.jobs.index_knowledge import index_knowledge

if __name__ == "__main__":
    setup_logging()
    print(index_knowledge())
