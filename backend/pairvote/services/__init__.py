"""Domain services, kept free of Socket.IO and HTTP concerns."""
