"""Payment domain modules: orders, rates, ledger, payments, reconciliation."""
