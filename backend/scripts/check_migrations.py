#!/usr/bin/env python
"""Check current migration status"""
import os
import sys
from alembic import command

sys.path.append(os.path.dirname(os.path.abspath(__file__)))

from run_migrations import alembic_config


def check_migrations():
    """Display current migration version"""
    command.current(alembic_config())


if __name__ == "__main__":
    check_migrations()
