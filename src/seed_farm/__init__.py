"""Dashboard controller for the SEED staking farm."""
