""" Remote document loaders for the requests and aiohttp libraries. """
