"""AWS client management and key management."""
