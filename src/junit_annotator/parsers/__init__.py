"""Document tree and JUnit schema adapter."""
