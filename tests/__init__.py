"""
Test suite for capledger

Contains:
- tests/unit/          : Unit tests for individual components and the Ledger surface
"""
