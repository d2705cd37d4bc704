# Separator used to join the fragments of deferred nested form callbacks
CALLBACK_SEPARATOR = " "
