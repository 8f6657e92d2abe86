"""Built-in problem catalog used when no problems directory is configured."""

from __future__ import annotations

BUILTIN_PROBLEMS: tuple[dict[str, object], ...] = (
    {
        "id": "binary-search",
        "title": "Binary Search",
        "difficulty": "easy",
        "patterns": ["binary-search"],
        "estimated_time": 10,
        "description": (
            "Given a sorted list of distinct integers nums and a target, return the "
            "index of target in nums, or -1 if it is absent. Aim for O(log n)."
        ),
        "examples": [
            {"input": "nums = [-1, 0, 3, 5, 9, 12], target = 9", "output": "4"},
            {"input": "nums = [-1, 0, 3, 5, 9, 12], target = 2", "output": "-1"},
        ],
        "pattern_explanation": (
            "Keep a half-open window [lo, hi) that must contain the target if it exists. "
            "Compare against the middle element and discard the half that cannot hold it."
        ),
        "solution_walkthrough": [
            "Set lo = 0 and hi = len(nums).",
            "While lo < hi, compute mid = (lo + hi) // 2.",
            "If nums[mid] < target move lo to mid + 1, otherwise move hi to mid.",
            "After the loop, check whether lo is in range and nums[lo] == target.",
        ],
        "function": "search",
        "starter_code": {
            "python": "def search(nums, target):\n    pass\n",
            "javascript": "function search(nums, target) {\n}\n",
            "go": "package main\n\nfunc search(nums []int, target int) int {\n\treturn -1\n}\n",
        },
        "solutions": {
            "python": (
                "def search(nums, target):\n"
                "    lo, hi = 0, len(nums)\n"
                "    while lo < hi:\n"
                "        mid = (lo + hi) // 2\n"
                "        if nums[mid] < target:\n"
                "            lo = mid + 1\n"
                "        else:\n"
                "            hi = mid\n"
                "    return lo if lo < len(nums) and nums[lo] == target else -1\n"
            ),
        },
        "test_cases": [
            {"input": "[-1, 0, 3, 5, 9, 12], 9", "expected": "4"},
            {"input": "[-1, 0, 3, 5, 9, 12], 2", "expected": "-1"},
            {"input": "[5], 5", "expected": "0"},
        ],
    },
    {
        "id": "longest-substring",
        "title": "Longest Substring Without Repeating Characters",
        "difficulty": "medium",
        "patterns": ["sliding-window"],
        "estimated_time": 25,
        "description": "Given a string s, return the length of the longest substring without repeating characters.",
        "examples": [
            {"input": 's = "abcabcbb"', "output": "3", "explanation": 'The answer is "abc".'},
            {"input": 's = "bbbbb"', "output": "1"},
        ],
        "pattern_explanation": (
            "Grow a window to the right one character at a time. When the new character "
            "already occurs inside the window, move the left edge just past its last occurrence."
        ),
        "solution_walkthrough": [
            "Track the last index at which each character was seen.",
            "Advance the right edge over the string.",
            "If the character was seen at or after the left edge, move left past it.",
            "Record the best window length after each step.",
        ],
        "function": "length_of_longest_substring",
        "starter_code": {
            "python": "def length_of_longest_substring(s):\n    pass\n",
            "javascript": "function lengthOfLongestSubstring(s) {\n}\n",
        },
        "solutions": {
            "python": (
                "def length_of_longest_substring(s):\n"
                "    last = {}\n"
                "    left = best = 0\n"
                "    for right, ch in enumerate(s):\n"
                "        if last.get(ch, -1) >= left:\n"
                "            left = last[ch] + 1\n"
                "        last[ch] = right\n"
                "        best = max(best, right - left + 1)\n"
                "    return best\n"
            ),
        },
        "test_cases": [
            {"input": '"abcabcbb"', "expected": "3"},
            {"input": '"bbbbb"', "expected": "1"},
            {"input": '"pwwkew"', "expected": "3"},
            {"input": '""', "expected": "0"},
        ],
    },
    {
        "id": "two-sum",
        "title": "Two Sum",
        "difficulty": "easy",
        "patterns": ["hash-map"],
        "estimated_time": 15,
        "description": (
            "Given a list of integers nums and an integer target, return the indices of "
            "the two numbers that add up to target. Exactly one solution exists."
        ),
        "examples": [
            {"input": "nums = [2, 7, 11, 15], target = 9", "output": "[0, 1]"},
        ],
        "pattern_explanation": (
            "Remember every value you have passed in a dictionary keyed by value. "
            "For each new number, the complement target - n is either already stored or not."
        ),
        "solution_walkthrough": [
            "Create an empty dict mapping value to index.",
            "For each index i and value n, compute need = target - n.",
            "If need is in the dict, return [seen[need], i].",
            "Otherwise store seen[n] = i and continue.",
        ],
        "function": "two_sum",
        "starter_code": {
            "python": "def two_sum(nums, target):\n    pass\n",
            "javascript": "function twoSum(nums, target) {\n}\n",
        },
        "solutions": {
            "python": (
                "def two_sum(nums, target):\n"
                "    seen = {}\n"
                "    for i, n in enumerate(nums):\n"
                "        if target - n in seen:\n"
                "            return [seen[target - n], i]\n"
                "        seen[n] = i\n"
                "    return []\n"
            ),
        },
        "test_cases": [
            {"input": "[2, 7, 11, 15], 9", "expected": "[0, 1]"},
            {"input": "[3, 2, 4], 6", "expected": "[1, 2]"},
            {"input": "[3, 3], 6", "expected": "[0, 1]"},
        ],
    },
    {
        "id": "valid-palindrome",
        "title": "Valid Palindrome",
        "difficulty": "easy",
        "patterns": ["two-pointers"],
        "estimated_time": 10,
        "description": (
            "Return True if s reads the same forwards and backwards after lower-casing it "
            "and removing every non-alphanumeric character."
        ),
        "examples": [
            {"input": 's = "A man, a plan, a canal: Panama"', "output": "True"},
            {"input": 's = "race a car"', "output": "False"},
        ],
        "pattern_explanation": (
            "Walk one pointer from each end toward the middle, skipping characters that "
            "do not count, and compare the pair at every step."
        ),
        "solution_walkthrough": [
            "Start with i = 0 and j = len(s) - 1.",
            "Skip non-alphanumeric characters on both sides.",
            "Compare lower-cased characters; a mismatch means False.",
            "Return True once the pointers meet.",
        ],
        "function": "is_palindrome",
        "starter_code": {
            "python": "def is_palindrome(s):\n    pass\n",
        },
        "solutions": {
            "python": (
                "def is_palindrome(s):\n"
                "    i, j = 0, len(s) - 1\n"
                "    while i < j:\n"
                "        if not s[i].isalnum():\n"
                "            i += 1\n"
                "        elif not s[j].isalnum():\n"
                "            j -= 1\n"
                "        elif s[i].lower() != s[j].lower():\n"
                "            return False\n"
                "        else:\n"
                "            i, j = i + 1, j - 1\n"
                "    return True\n"
            ),
        },
        "test_cases": [
            {"input": '"A man, a plan, a canal: Panama"', "expected": "True"},
            {"input": '"race a car"', "expected": "False"},
            {"input": '" "', "expected": "True"},
        ],
    },
    {
        "id": "container-with-most-water",
        "title": "Container With Most Water",
        "difficulty": "medium",
        "patterns": ["two-pointers"],
        "estimated_time": 20,
        "description": (
            "Given heights of vertical lines, pick two lines that together with the x-axis "
            "hold the most water and return that amount."
        ),
        "examples": [
            {"input": "height = [1, 8, 6, 2, 5, 4, 8, 3, 7]", "output": "49"},
        ],
        "pattern_explanation": (
            "Start with the widest container. Only moving the shorter wall inward can "
            "possibly find a taller container, so do that until the pointers meet."
        ),
        "solution_walkthrough": [
            "Place pointers at both ends.",
            "Area is min(height[i], height[j]) * (j - i); keep the best.",
            "Move whichever pointer points at the shorter line.",
        ],
        "function": "max_area",
        "starter_code": {
            "python": "def max_area(height):\n    pass\n",
        },
        "solutions": {
            "python": (
                "def max_area(height):\n"
                "    i, j, best = 0, len(height) - 1, 0\n"
                "    while i < j:\n"
                "        best = max(best, min(height[i], height[j]) * (j - i))\n"
                "        if height[i] < height[j]:\n"
                "            i += 1\n"
                "        else:\n"
                "            j -= 1\n"
                "    return best\n"
            ),
        },
        "test_cases": [
            {"input": "[1, 8, 6, 2, 5, 4, 8, 3, 7]", "expected": "49"},
            {"input": "[1, 1]", "expected": "1"},
        ],
    },
)
