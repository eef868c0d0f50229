"""HC Stock: stock information and blog backend."""
