"""Support chat between travellers, anonymous visitors and the TravelEase team."""
