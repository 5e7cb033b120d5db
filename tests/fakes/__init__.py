"""Hand-written fakes for the paging engine's collaborators."""
