"""Domain models: the USB function table and the capability snapshot."""
