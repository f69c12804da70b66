"""External collaborators: paint tool and wallpaper daemon."""
