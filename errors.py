class HuffmanError(Exception): # base class for every failure raised by the codec
    pass


class EmptyInputError(HuffmanError, ValueError): # encode requested with zero symbols
    pass


class UnsupportedSymbolError(HuffmanError, ValueError): # symbol that cannot live on a single container line
    pass


class MalformedContainerError(HuffmanError, ValueError): # container does not parse into the expected lines
    pass


class CorruptedDataError(HuffmanError, ValueError): # container parses but breaks a code table invariant
    pass


class ResourceExhaustionError(HuffmanError): # ran out of memory or stack while building/walking the tree
    pass
