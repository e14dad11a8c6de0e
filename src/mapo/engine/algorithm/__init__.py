"""Search strategies and the components they share."""
