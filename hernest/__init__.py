"""HerNest: menstrual health and appointment portal API."""
