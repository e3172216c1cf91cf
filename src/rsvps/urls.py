SUBMIT_RSVP_URL = "/api/rsvp"
LIST_RSVPS_URL = "/api/rsvps"
