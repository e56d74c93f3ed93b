"""Services combining storage access with the pure exchange calculations."""
