"""Expression language used to write vetter validation targets.

This module provides:
- Lexer: Tokenizes expression strings
- Parser: Produces an AST from tokens (``.`` is the value under validation)
- Evaluator: Evaluates an AST against a context
- FunctionRegistry: Registry for callable functions
- to_source / walk: Render and traverse ASTs
"""

from vetter.expressions.evaluator import (
    EvaluationContext,
    EvaluationError,
    Evaluator,
    evaluate,
    is_number,
)
from vetter.expressions.functions import (
    FunctionCategory,
    FunctionDefinition,
    FunctionParameter,
    FunctionRegistry,
)
from vetter.expressions.lexer import Lexer, LexerError, Token, TokenType
from vetter.expressions.parser import (
    ASTNode,
    ArrayLiteral,
    BinaryOp,
    FunctionCall,
    Identifier,
    IndexAccess,
    Literal,
    MemberAccess,
    ObjectLiteral,
    ParseError,
    Parser,
    Placeholder,
    UnaryOp,
    parse,
)
from vetter.expressions.source import contains_placeholder, to_source, transform, walk

__all__ = [
    # Evaluator
    "EvaluationContext",
    "EvaluationError",
    "Evaluator",
    "evaluate",
    "is_number",
    # Functions
    "FunctionCategory",
    "FunctionDefinition",
    "FunctionParameter",
    "FunctionRegistry",
    # Lexer
    "Lexer",
    "LexerError",
    "Token",
    "TokenType",
    # Parser
    "ASTNode",
    "ArrayLiteral",
    "BinaryOp",
    "FunctionCall",
    "Identifier",
    "IndexAccess",
    "Literal",
    "MemberAccess",
    "ObjectLiteral",
    "ParseError",
    "Parser",
    "Placeholder",
    "UnaryOp",
    "parse",
    # Source
    "contains_placeholder",
    "to_source",
    "transform",
    "walk",
]
