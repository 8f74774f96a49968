"""Domain services shared by routes and scheduled jobs."""
