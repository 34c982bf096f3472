"""Feature modules: accounts, wallets, messaging, notifications, reviews and bookings."""
