# Error codes reported in the errCode field of image endpoint failures
IMAGE001 = "IMAGE001"  # recording an uploaded image failed
POST001 = "POST001"  # liking a post failed
POST002 = "POST002"  # unliking a post failed
