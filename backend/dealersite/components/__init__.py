"Component bindings: static factory table plus precedence-ordered resolution."
