# tx_launch Package
"""
Terminal launcher for Android apps under Termux.

Components:
  - Services: catalog store, builder, change detector, package manager
  - Search: label resolution and REPL command routing
  - CLI/REPL: one-shot launches and the interactive prompt
"""

__version__ = "0.1.5"
