"""
Command Line Interface Package

Command Structure:
- ynabber: Main entry point with utility commands (version, config)
- ynabber sync: Create new Akahu transactions in YNAB
- ynabber status: Show per-account watermarks
- ynabber ynab payees: List budget payees for writing payee rules
"""
