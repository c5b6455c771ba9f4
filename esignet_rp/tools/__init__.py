"""eSignet client tools: assertion signing, token exchange and userinfo decoding."""
