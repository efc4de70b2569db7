"""Domain packages for the squash booking acceptance-test driver."""
