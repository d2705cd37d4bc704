from freeform import setupModule

config, logger = setupModule(__name__)
