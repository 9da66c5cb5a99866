"""AtCampus Flask API."""
