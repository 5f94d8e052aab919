"""Board-game café catalog and Party Finder backend."""
