# Log the exception at construction time of every FreeFormException
DEBUG_APP_EXCEPTION = False
