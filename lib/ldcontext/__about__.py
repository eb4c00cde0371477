# PyLD-Context JSON-LD context processor
__copyright__ = 'Copyright (c) 2011-2024 Digital Bazaar, Inc.'
__license__ = 'New BSD license'
__version__ = '1.0.0'
