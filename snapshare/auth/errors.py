# Error codes reported in the errCode field of account endpoint failures
AUTH001 = "AUTH001"  # registration failed
AUTH002 = "AUTH002"  # login failed
AUTH003 = "AUTH003"  # issuing a reset token failed
AUTH004 = "AUTH004"  # resetting the password failed
