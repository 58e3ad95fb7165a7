"""Product search: document CRUD and offset-paged search over a remote index."""
