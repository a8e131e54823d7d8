"""HTTP play service for Triple Solitaire."""
