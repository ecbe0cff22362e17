# error.py


class MathError(Exception):
    def __init__(self, message, code="9999", equation=None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.equation = equation

class LexicalError(MathError):
    pass

class SyntaxError(MathError):
    pass

class CalculationError(MathError):
    pass

class ConfigError(MathError):
    pass




Error_Dictionary= {

    "3" : "Calculator Error",
    "4" : "UI Error",
    "5" : "Configuration Error",
    "9" : "Runtime Error"

}

#Error Messages are structured in:
# 1. Digit: Main Error
# 2. Digit: Stage (0 = Lexer, 1 = Parser, 2 = Evaluation)
# 3. and 4. Digit: Error Number



ERROR_MESSAGES = {
    "3000" : "Empty input.",
    "3001" : "Unexpected character: ", # + character
    "3002" : "Invalid number: ", # + literal
    "3003" : "Division by zero in a fraction literal.",

    "3100" : "Missing ')'. ",
    "3101" : "Missing '('. ",
    "3102" : "Malformed expression.",
    "3103" : "Function without argument: ", # + function
    "3104" : "Exponent must be an integer.",
    "3105" : "Exponent too large.",
    "3106" : "Expression nested too deeply.",

    "3200" : "Division by zero",
    "3201" : "Angle not recognized for a decimal reading.",
    "3202" : "Square root argument not supported yet.",
    "3203" : "Power base not supported yet.",
    "3204" : "Square root of a negative number.",
    "3205" : "Variable in the expression, no decimal reading.",
    "3206" : "Undefined value (indéfini), no decimal reading.",
    "3207" : "Number too large.",

    "4000" : "Empty input.",
    "4001" : "Calculation already running!",

    "5000" : "Settings file could not be read: ", # + path
    "5001" : "Not all Settings could be saved: ", # + path

    "9999" : "Unexpected Error: " #+error
}
