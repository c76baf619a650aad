"""
Worked example programs for the Y-combinator derivation
Each entry is Scheme source plus the text its final value or error prints as
"""

from typing import Dict, List


UNBOUND_FACT = "fact: unbound identifier in: fact"


FACT_GENERATOR = """\
(lambda (f)
  (lambda (n)
    (if (= n 0)
        1
        (* n (f (- n 1))))))"""


Y_DEFINITION = """\
(define Y
  (lambda (g)
    ((lambda (i) (i i))
     (lambda (self)
       (g (lambda (x) ((self self) x)))))))
"""


def make_example(source: str, expected: str, category: str, description: str) -> Dict:
  """Create a registry entry"""
  return {
      'source': source,
      'expected': expected,
      'category': category,
      'description': description
  }


# ============================================================================
# NAIVE ATTEMPTS
# ============================================================================

NAIVE_EXAMPLES = {
    'naive-let': make_example("""\
(let ((fact (lambda (n)
              (if (= n 0)
                  1
                  (* n (fact (- n 1)))))))
  (fact 5))
""", UNBOUND_FACT, "naive",
        "let does not put fact in scope of its own initializer"),

    'naive-lambda': make_example("""\
((lambda (n)
   (if (= n 0)
       1
       (* n (fact (- n 1)))))
 5)
""", UNBOUND_FACT, "naive",
        "an anonymous lambda has no name to recur through"),
}


# ============================================================================
# WORKING ALTERNATIVES
# ============================================================================

SUCCESS_EXAMPLES = {
    'success-define': make_example("""\
(define fact
  (lambda (n)
    (if (= n 0)
        1
        (* n (fact (- n 1))))))
(fact 5)
""", "120", "success",
        "global define: recursion through a top-level binding"),

    'success-letrec': make_example("""\
(letrec ((fact (lambda (n)
                 (if (= n 0)
                     1
                     (* n (fact (- n 1)))))))
  (fact 5))
""", "120", "success",
        "letrec: the initializer sees its own binding"),

    'success-set!': make_example("""\
(let ((fact 'dummy))
  (set! fact
        (lambda (n)
          (if (= n 0)
              1
              (* n (fact (- n 1))))))
  (fact 5))
""", "120", "success",
        "set!: overwrite a placeholder binding with the procedure"),

    'success-self-pass': make_example("""\
(let ((fact (lambda (self n)
              (if (= n 0)
                  1
                  (* n (self self (- n 1)))))))
  (fact fact 5))
""", "120", "success",
        "pass the procedure to itself as an extra argument"),
}


# ============================================================================
# DERIVATION CHAIN
# ============================================================================

DERIVATION_EXAMPLES = {
    'derive-01-curried-self-pass': make_example("""\
(let ((i (lambda (self)
           (lambda (n)
             (if (= n 0)
                 1
                 (* n ((self self) (- n 1))))))))
  ((i i) 5))
""", "120", "derivation",
        "starting point: curry the self-passing version"),

    'derive-02-eta-expand': make_example("""\
(let ((i (lambda (self)
           (lambda (n)
             (if (= n 0)
                 1
                 (* n ((lambda (x) ((self self) x)) (- n 1))))))))
  ((i i) 5))
""", "120", "derivation",
        "wrap (self self) in a lambda so it is not applied early"),

    'derive-03-let-bind-f': make_example("""\
(let ((i (lambda (self)
           (lambda (n)
             (let ((f (lambda (x) ((self self) x))))
               (if (= n 0)
                   1
                   (* n (f (- n 1)))))))))
  ((i i) 5))
""", "120", "derivation",
        "name the wrapped self-application f"),

    'derive-04-hoist-let': make_example("""\
(let ((i (lambda (self)
           (let ((f (lambda (x) ((self self) x))))
             (lambda (n)
               (if (= n 0)
                   1
                   (* n (f (- n 1)))))))))
  ((i i) 5))
""", "120", "derivation",
        "move the let of f outside (lambda (n) ...)"),

    'derive-05-let-to-lambda': make_example("""\
(let ((i (lambda (self)
           ((lambda (f)
              (lambda (n)
                (if (= n 0)
                    1
                    (* n (f (- n 1))))))
            (lambda (x) ((self self) x))))))
  ((i i) 5))
""", "120", "derivation",
        "rewrite the let of f as a lambda application"),

    'derive-06-name-generator': make_example(f"""\
(let ((g {FACT_GENERATOR}))
  (let ((i (lambda (self)
             (g (lambda (x) ((self self) x))))))
    ((i i) 5)))
""", "120", "derivation",
        "pull the factorial generator out as g"),

    'derive-07-bind-fact': make_example(f"""\
(let ((g {FACT_GENERATOR}))
  (let ((fact (let ((i (lambda (self)
                         (g (lambda (x) ((self self) x))))))
                (i i))))
    (fact 5)))
""", "120", "derivation",
        "bind the self-application (i i) to fact"),

    'derive-08-self-apply-lambda': make_example(f"""\
(let ((g {FACT_GENERATOR}))
  (let ((fact ((lambda (i) (i i))
               (lambda (self)
                 (g (lambda (x) ((self self) x)))))))
    (fact 5)))
""", "120", "derivation",
        "replace the let of i with (lambda (i) (i i))"),

    'derive-09-abstract-g': make_example(f"""\
(let ((g {FACT_GENERATOR}))
  (let ((fact ((lambda (g)
                 ((lambda (i) (i i))
                  (lambda (self)
                    (g (lambda (x) ((self self) x))))))
               g)))
    (fact 5)))
""", "120", "derivation",
        "abstract over g: the construction no longer mentions factorial"),

    'derive-10-let-bind-y': make_example(f"""\
(let ((Y (lambda (g)
           ((lambda (i) (i i))
            (lambda (self)
              (g (lambda (x) ((self self) x))))))))
  (let ((g {FACT_GENERATOR}))
    (let ((fact (Y g)))
      (fact 5))))
""", "120", "derivation",
        "name the abstraction Y"),

    'derive-11-bind-y-g-to-fact': make_example(f"""\
{Y_DEFINITION}
(let ((fact (Y {FACT_GENERATOR})))
  (fact 5))
""", "120", "derivation",
        "standalone Y; bind (Y g) to fact"),
}


# ============================================================================
# Y-COMBINATOR EXAMPLES
# ============================================================================

Y_EXAMPLES = {
    'y-factorial': make_example(f"""\
{Y_DEFINITION}
((Y {FACT_GENERATOR})
 5)
""", "120", "y-combinator",
        "factorial of 5"),

    'y-factorial-zero': make_example(f"""\
{Y_DEFINITION}
((Y {FACT_GENERATOR})
 0)
""", "1", "y-combinator",
        "base case: the recursive branch is never evaluated"),

    'y-sum': make_example(f"""\
{Y_DEFINITION}
((Y (lambda (sum)
      (lambda (n)
        (if (= n 0)
            0
            (+ n (sum (- n 1)))))))
 5)
""", "15", "y-combinator",
        "sum of 0..5"),

    'y-length': make_example(f"""\
{Y_DEFINITION}
((Y (lambda (length)
      (lambda (lst)
        (if (null? lst)
            0
            (add1 (length (cdr lst)))))))
 '(a b c))
""", "3", "y-combinator",
        "length of a three element list"),

    'y-map': make_example(f"""\
{Y_DEFINITION}
(((Y (lambda (map)
       (lambda (f)
         (lambda (lst)
           (if (null? lst)
               '()
               (cons (f (car lst))
                     ((map f) (cdr lst))))))))
  add1)
 '(1 2 3))
""", "(2 3 4)", "y-combinator",
        "map add1 over (1 2 3)"),
}


EXAMPLES: Dict[str, Dict] = {
    **NAIVE_EXAMPLES,
    **SUCCESS_EXAMPLES,
    **DERIVATION_EXAMPLES,
    **Y_EXAMPLES,
}


def example_names(category: str = "") -> List[str]:
  """Registered example names in document order, optionally by category"""
  return [name for name, example in EXAMPLES.items()
          if not category or example['category'] == category]
