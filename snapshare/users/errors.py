# Error codes reported in the errCode field of user endpoint failures
USER001 = "USER001"  # listing users failed
USER002 = "USER002"  # fetching a single user failed
USER003 = "USER003"  # username suggestions failed
