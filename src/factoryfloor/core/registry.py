# The registry of session tools: name -> handler
TOOL_REGISTRY = {}

# The registry of tool descriptions: name -> (description, parameter names)
TOOL_SPEC_REGISTRY = {}

def register_tool(name: str, description: str = "", parameters=()):
    def deco(func):
        TOOL_REGISTRY[name] = func
        TOOL_SPEC_REGISTRY[name] = (description, tuple(parameters))
        return func
    return deco
