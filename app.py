# app.py
"""
Application entry point.

Usage:
  python app.py migrate --db aviary.db
  python app.py login --role admin
  python app.py batch add --batch-number B2024-001 --initial-count 1500 --breed "ISA Brown" --supplier "Sunrise Hatchery"
  python app.py eggs import production.csv
  python app.py inventory export --dir exports
  python app.py overview --role worker
"""

from aviary.adapters.cli import main

if __name__ == "__main__":
    main()
