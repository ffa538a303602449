"""Fixed health thresholds shared by the health engine and topology node flags."""

# Transceiver temperature, same unit as reported (C)
SFP_TEMP_WARNING = 70
SFP_TEMP_CRITICAL = 80

# Receive error counters
RX_ERRORS_WARNING = 100
RX_ERRORS_CRITICAL = 10_000

# Receive drop counters (single tier)
RX_DROPPED_WARNING = 100_000
