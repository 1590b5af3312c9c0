"""
budgetwatch - Source Package

A personal weekly budget tracker that keeps an always-on spending
summary and raises an alert when the week's spending gets close to,
or goes over, the combined weekly limit.

DESIGN PRINCIPLES:
1. Stores own the data, everyone else reads snapshots
2. Every store change is published, in order, to subscribers
3. Notifications are recomputed from scratch on every change
4. Bad stored values degrade to defaults, never crash a read
5. Storage and notification backends are swappable
"""

__version__ = "1.0.0"
__author__ = "budgetwatch Team"
