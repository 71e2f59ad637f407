"""Services: translation cache, translation provider, background jobs, FAQ CRUD."""
