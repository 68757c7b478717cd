"""Front-ends that drive a session controller."""
