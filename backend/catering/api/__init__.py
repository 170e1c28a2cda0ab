"""HTTP routers for the catering API."""
