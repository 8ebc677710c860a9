"""Suite traversal, retry reconciliation and test case evaluation."""
