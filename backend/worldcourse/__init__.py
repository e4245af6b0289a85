"""WorldCourse learning platform API."""
