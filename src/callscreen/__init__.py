"""callscreen: incoming call screening against stored number rules."""
