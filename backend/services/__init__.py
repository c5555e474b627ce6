# Use-case layer: each service receives the Store and the acting user.
