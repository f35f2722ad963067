"""Console front end: bootstrap, slash commands and the input loop."""
