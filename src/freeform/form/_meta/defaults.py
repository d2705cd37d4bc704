# Raise on keys that are neither a property nor a nested `<attr>_attributes` key.
# When disabled, such keys are logged and skipped.
STRICT_FILL = True

# Mass-assignment key of a nested attribute: <attr>_attributes
NESTED_ATTRIBUTES_SUFFIX = "_attributes"

# Builder name of a nested attribute: build_<attr> / build_<singular>
BUILD_PREFIX = "build_"
