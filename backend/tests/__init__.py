# ShopLedger backend tests
#
# Run from the repository root with: python -m pytest
