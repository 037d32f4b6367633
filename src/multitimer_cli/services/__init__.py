"""Services: persistence, notifications, timer management and scheduling."""
