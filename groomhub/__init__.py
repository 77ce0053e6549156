"""GroomHub: salon and independent professional discovery backend."""
